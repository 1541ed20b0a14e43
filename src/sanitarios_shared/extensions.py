"""
Shared Flask extensions.
"""

from flask_wtf.csrf import CSRFProtect

# CSRF protection for every form post of the dashboard
csrf = CSRFProtect()
