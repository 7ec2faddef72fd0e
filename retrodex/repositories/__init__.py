"""
Repositories package

Each repository encapsulates database operations for a model:
- console_repository.py
- emulator_repository.py
- compatibility_repository.py
- etc.

Usage:
    from retrodex.repositories.console_repository import ConsoleRepository
    console = ConsoleRepository.get_by_slug("super-nintendo")
"""
