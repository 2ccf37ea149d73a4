from linkshortener.service.locks import TokenLocks
from linkshortener.service.eviction_engine import EvictionEngine, PeriodicSweeper, liveness, is_live
from linkshortener.service.session import Session
from linkshortener.service.link_service import LinkService
from linkshortener.service.factory import build_link_service, get_link_service


__all__ = [
    'TokenLocks',
    'EvictionEngine',
    'PeriodicSweeper',
    'liveness',
    'is_live',
    'Session',
    'LinkService',
    'build_link_service',
    'get_link_service',
]
