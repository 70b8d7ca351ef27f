#!/usr/bin/env python3
"""
Basic usage example for the GeoReverse module.
"""
from GeoReverse import GeocodeService
from GeoReverse.utils import format_json

PLACES = {
    "Eiffel Tower": (48.8584, 2.2945),
    "Brandenburg Gate": (52.5163, 13.3777),
    "Golden Gate Bridge": (37.8199, -122.4783),
    "Sydney Opera House": (-33.8568, 151.2153),
}

def main():
    """Main function."""
    # The first run downloads the GeoNames data and writes the snapshot
    with GeocodeService(min_population=5000) as service:
        print(format_json(service.get_info()))

        for name, (lat, lng) in PLACES.items():
            city = service.query(lat, lng)[0]
            print(f"{name}: {city.city}, {city.state}, {city.country}")

if __name__ == '__main__':
    main()
