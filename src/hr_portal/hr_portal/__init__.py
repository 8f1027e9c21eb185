"""HR Portal package.

Organized by feature modules (geo, attendance, holidays, reports, ...)
with a thin Flask controller layer over service/repository layers.
"""
