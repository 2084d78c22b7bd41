#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.kv_entry import KVEntryModel

__all__ = ["KVEntryModel"]
