"""
Crypto Portal Service

Server-rendered crypto news, coin info and price pages assembled from two
third-party providers.

Architecture:
    request -> web -> providers.client -> providers.normalizer -> curation -> rendering -> response

Components:
    - config: Settings loaded once from the environment at startup
    - providers: newsdata.io and CoinMarketCap HTTP client plus JSON normalizers
    - curation: news de-duplication, display limits, rank ordering
    - rendering: escaped HTML fragments and page template substitution
    - web: aiohttp routes mapping each page to its pipeline
"""
