"""InOut attendance package.

Organized by feature modules (users, locations, attendance, tenants, ...)
with a thin Flask controller layer over service/repository layers that talk
to an abstract document store.
"""
