"""Contact module -- schemas, persistence models and backend clients for contacts.

Provides Pydantic schemas (InternalContact, AcmeContact), SQLAlchemy models
(acme_contacts, internal_contacts), ContactRepository for PostgreSQL,
RedisContactStore for Redis, and the AcmeCRM <-> internal contact mapper.
The storage subpackage exposes them behind the StorageAdapter contract.
"""
