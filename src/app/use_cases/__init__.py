"""
Use Cases

Organized into domain folders:
- auth/: Sign-in and password reset flows
- debug/: Operational diagnostics

Import from subdirectories.
"""
