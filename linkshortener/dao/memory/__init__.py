from linkshortener.dao.memory.datastore import MemoryDataStore
from linkshortener.dao.memory.mixins import MemoryStoreMixin
from linkshortener.dao.memory.link_memory_dao import LinkMemoryDAO
from linkshortener.dao.memory.user_memory_dao import UserMemoryDAO


__all__ = [
    'MemoryDataStore',
    'MemoryStoreMixin',
    'LinkMemoryDAO',
    'UserMemoryDAO',
]
