from sapluck.sainfo.version import *  # noqa: shortcut


try:
    # SA 2.0
    from sqlalchemy.orm import declarative_base, DeclarativeMeta
except ImportError:
    # 1.4
    from sqlalchemy.ext.declarative import declarative_base, DeclarativeMeta  # type: ignore[no-redef]
