"""
bitcolumn - store many boolean flags in one integer column.

    from sqlalchemy.orm import Mapped, mapped_column
    from bitcolumn import BitColumnBase, bitfield_column

    class Item(BitColumnBase):
        __tablename__ = "item"
        id: Mapped[int] = mapped_column(primary_key=True)
        status = bitfield_column(["active", "inactive", "foo", "bar"])

    item = Item(id=1, active=True, foo=True)
    item.status     # ['active', 'foo']
    item._status    # 5
    item.foo = False
    item.status     # ['active']
"""

__version__ = "0.1.0"

from bitcolumn.core import *  # noqa: F401,F403
from bitcolumn.core import __all__ as _core_all
from bitcolumn.orm import *  # noqa: F401,F403
from bitcolumn.orm import __all__ as _orm_all

__all__ = ["__version__", *_core_all, *_orm_all]
