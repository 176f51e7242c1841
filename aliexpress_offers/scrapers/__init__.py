"""
Product page scraping used to backfill metadata the affiliate API leaves out.
"""
from .base_scraper import BaseScraper
from .aliexpress_scraper import AliExpressScraper

__all__ = [
    'BaseScraper',
    'AliExpressScraper',
]
