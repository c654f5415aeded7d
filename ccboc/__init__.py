"""
ccboc - command-line client for the CCB operator calculation API.

This CLI talks to the API server over authenticated REST calls to:
- Create and inspect calculations
- Submit, list and delete calculation bulks
- Manage worker pools
- Download calculation results
- Watch the phases of a bulk as a colour-coded grid
"""

__version__ = "0.1.0"
__app_name__ = "ccboc"
