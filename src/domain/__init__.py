"""Domain layer - Pure business logic.

Credentials and usage plans, store operation descriptors, and the protocols
(ports) for the store, usage storage and logging. The domain layer has NO
dependencies on any framework or infrastructure - it is pure Python.

Structure:
- entities/: Domain entities (have identity)
- value_objects/: Value objects (immutable, no identity)
- protocols/: Domain protocols (ports implemented by infrastructure)
- errors/: Domain error types carried in Result values
- enums/: Domain enumerations
"""
