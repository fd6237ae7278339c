"""
simbench: wall-clock comparison of Solana simulateTransaction calls issued
from a thread pool versus a single asyncio event loop
"""

__version__ = '0.1.0'
