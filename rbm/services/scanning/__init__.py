"""Website fetching and on-page signal extraction"""
