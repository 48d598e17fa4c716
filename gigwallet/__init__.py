"""GigWallet - gig marketplace payments backend"""

__version__ = "0.1.0"
