from linkshortener.dao.base.link_base_dao import LinkBaseDAO, listing_order
from linkshortener.dao.base.user_base_dao import UserBaseDAO


__all__ = [
    'LinkBaseDAO',
    'UserBaseDAO',
    'listing_order',
]
