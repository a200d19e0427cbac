"""Research/Build/Manage - SEO and content operations backend"""

__version__ = "0.1.0"
