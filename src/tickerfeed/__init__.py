"""Paginated news, ticker and video feeds for the crypto sentiment client."""
