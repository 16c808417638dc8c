# __init__.py
from jobboard.models.document import DocumentRecord

__all__ = [
	"DocumentRecord",
]
