#!/usr/bin/env python3
"""
Configuration Validation Script
Validates that all required environment variables are set correctly
"""
import json
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def validate_config():
    """Validate configuration"""
    print("Validating configuration...\n")

    errors = []
    warnings = []

    # Check Google OAuth
    client_id = os.getenv('GOOGLE_CLIENT_ID')
    client_secret = os.getenv('GOOGLE_CLIENT_SECRET')

    if not client_id or client_id == 'your-google-client-id.apps.googleusercontent.com':
        errors.append("GOOGLE_CLIENT_ID not configured")
    else:
        print("GOOGLE_CLIENT_ID is set")
    if not client_secret or client_secret == 'your-google-client-secret':
        errors.append("GOOGLE_CLIENT_SECRET not configured")
    else:
        print("GOOGLE_CLIENT_SECRET is set")

    redirect_uri = os.getenv('GOOGLE_REDIRECT_URI')
    if not redirect_uri:
        warnings.append("GOOGLE_REDIRECT_URI not set (default http://localhost:8000/api/v1/auth/callback)")
    else:
        print("GOOGLE_REDIRECT_URI:", redirect_uri)

    # Optional service account for spreadsheet validation
    service_account_file = os.getenv('GOOGLE_SERVICE_ACCOUNT_FILE')
    if service_account_file:
        path = Path(service_account_file)
        if not path.exists():
            errors.append(f"GOOGLE_SERVICE_ACCOUNT_FILE does not exist: {service_account_file}")
        else:
            try:
                info = json.loads(path.read_text(encoding='utf-8'))
                print("Service account:", info.get('client_email', '<missing client_email>'))
            except ValueError:
                errors.append("GOOGLE_SERVICE_ACCOUNT_FILE is not valid JSON")
    else:
        print("No service account: spreadsheets are validated with the user's token")

    # Form registry store
    forms_file = Path(os.getenv('FORMS_FILE', './data/forms.json'))
    print(f"FORMS_FILE: {forms_file}")
    forms_dir = forms_file.parent
    if forms_dir.exists() and not os.access(forms_dir, os.W_OK):
        errors.append(f"Form registry directory is not writable: {forms_dir}")
    elif not forms_dir.exists():
        warnings.append("Form registry directory does not exist; will be created on first write.")
    if forms_file.exists():
        try:
            forms = json.loads(forms_file.read_text(encoding='utf-8'))
            print(f"   {len(forms)} forms registered")
        except ValueError:
            errors.append("FORMS_FILE is not valid JSON (the registry would start empty)")

    templates_dir = os.getenv('TEMPLATES_DIR')
    if templates_dir:
        if not Path(templates_dir).is_dir():
            errors.append(f"TEMPLATES_DIR is not a directory: {templates_dir}")
        else:
            print(f"TEMPLATES_DIR: {templates_dir}")

    secret_key = os.getenv('SECRET_KEY')
    if not secret_key:
        errors.append("SECRET_KEY is not set")
    elif secret_key == 'your-secret-key-change-this-in-production':
        warnings.append("SECRET_KEY is default (change in production)")
    else:
        print("SECRET_KEY is set")
    print("\n" + "="*60)
    if warnings:
        print("\nWARNINGS:")
        for w in warnings:
            print(" ", w)
    if errors:
        print("\nERRORS:")
        for e in errors:
            print(" ", e)
        print("\nValidation failed. Fix errors above.\n")
        return False
    print("\nValidation passed.\n")
    return True


if __name__ == "__main__":
    success = validate_config()
    sys.exit(0 if success else 1)
