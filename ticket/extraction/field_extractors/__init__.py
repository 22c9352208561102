"""
Field Extractors Package
"""
from .base_extractor import FieldExtractor
from .movie_title_extractor import MovieTitleExtractor
from .show_time_extractor import ShowTimeExtractor
from .show_date_extractor import ShowDateExtractor
from .price_extractor import PriceExtractor
from .seat_extractor import SeatExtractor
from .movie_rating_extractor import MovieRatingExtractor, standardize_rating
from .theater_room_extractor import TheaterRoomExtractor
from .ticket_number_extractor import TicketNumberExtractor
from .theater_name_extractor import TheaterNameExtractor
from .theater_chain_extractor import TheaterChainExtractor
from .ticket_type_extractor import TicketTypeExtractor

__all__ = [
    'FieldExtractor',
    'MovieTitleExtractor',
    'ShowTimeExtractor',
    'ShowDateExtractor',
    'PriceExtractor',
    'SeatExtractor',
    'MovieRatingExtractor',
    'standardize_rating',
    'TheaterRoomExtractor',
    'TicketNumberExtractor',
    'TheaterNameExtractor',
    'TheaterChainExtractor',
    'TicketTypeExtractor'
]
