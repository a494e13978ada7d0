"""
AutoMove

Утилита для раскладки фотографий и видео по каталогам год/месяц (YYYY/YYYY-MM Month).
"""

__version__ = "1.0.0"
__author__ = "AutoMove Team"
__description__ = "Utility for sorting pictures and videos into year/month folders"
