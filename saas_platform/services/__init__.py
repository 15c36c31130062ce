"""
Domain services orchestrating repositories through a shared UnitOfWork.
"""
