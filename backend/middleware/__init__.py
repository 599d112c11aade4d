"""
Request gateway middleware: Devvit auth and rate limiting
"""
