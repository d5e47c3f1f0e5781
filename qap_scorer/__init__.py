"""
Georgia QAP site scorer: pick a site, fetch its score, map and break it down
"""
__version__ = "0.1.0"
