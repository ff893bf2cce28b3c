"""
HotelDesk - guesthouse front-desk backend and console client
"""
__version__ = "1.0.0"
