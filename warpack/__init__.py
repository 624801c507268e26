"""warpack - classes packaging for web-application archive assembly.

Decides whether compiled classes are copied into ``WEB-INF/classes`` or bundled
into a single jar under ``WEB-INF/lib`` and keeps every output path claimed once.
"""

__version__ = "0.1.0"
__author__ = "warpack Contributors"

from warpack.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
