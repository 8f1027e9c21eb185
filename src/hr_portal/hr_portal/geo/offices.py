"""Static office table.

Order matters: the resolver keeps the first office on distance ties.
"""

from __future__ import annotations

from .model import OfficeLocation

OFFICE_LOCATIONS: tuple[OfficeLocation, ...] = (
    OfficeLocation("AP MARITIME BOARD HEAD OFFICE", 16.4228036, 80.562812),
    OfficeLocation("APMB LA KAVALI", 14.8860989, 79.985184),
    OfficeLocation("APMB VIZAG DHC", 17.744005, 83.312909),
    OfficeLocation("APMB, Mangalagiri", 16.4962219, 80.586393),
    OfficeLocation("BPDCL PORT SITE", 18.5334655, 84.325332),
    OfficeLocation("Jawahar Jetty - Kakinada", 16.9396366, 82.2433),
    OfficeLocation("Juvulladinne FH", 14.8039829, 80.07975),
    OfficeLocation("Machilipatnam Port Office", 16.1856213, 81.141544),
    OfficeLocation("Marine Division", 16.9550966, 82.266864),
    OfficeLocation("MPDCL PORT SITE", 16.1955344, 81.147925),
    OfficeLocation("MTP F H", 16.1754636, 81.163208),
    OfficeLocation("PO.MTM Tab", 16.2156543, 81.207175),
    OfficeLocation("PORT OFFICE RPDCL", 15.0111129, 80.04796),
    OfficeLocation("Port Office, Kakinada", 16.9549063, 82.266887),
    OfficeLocation("RPDCL PORT SITE", 15.0111129, 80.04796),
    OfficeLocation("RR Colony Mondivaripalem", 15.0486275, 80.021878),
    OfficeLocation("Sample Test Location", 16.5061743, 80.6480153),
)

