"""SheetForms: forms backed by Google Sheets"""
