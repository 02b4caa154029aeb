"""
Service layer abstraction.

Each service encapsulates the business rules for a domain and receives
the ``Database`` gateway it works on as a constructor argument.
"""
