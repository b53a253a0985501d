"""
Service layer.

Each service encapsulates the business rules for one domain and is
constructed with the ``DocumentStore`` handle it operates on, so the
same classes serve the running application and the tests.
"""
