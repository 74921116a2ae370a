"""
Persistence package: the process-wide DBStorage instance.

The engine is created when the application factory calls storage.reload().
"""
from models.db_storage import DBStorage

storage = DBStorage()
