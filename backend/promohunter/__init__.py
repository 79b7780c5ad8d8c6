"""PromoHunter: marketplace offer scraping and curation backend."""

__version__ = "0.1.0"
