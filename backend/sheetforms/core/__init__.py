"""Core package: errors and request security"""
