"""
orgdir: transactional person/contact/principal/account directory core.
"""

__version__ = "0.1.0"
