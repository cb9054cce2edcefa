"""
TNBC CDS Hooks Service

Order-select advisory cards for post-neoadjuvant triple-negative breast
cancer (BRCA testing, adjuvant olaparib / capecitabine / pembrolizumab).
"""
from .config import VERSION

__version__ = VERSION
