#!/usr/bin/env python3
"""
Start the GeoReverse API with a population threshold.

Run this script and then try:
    curl "http://localhost:8080/api/reverse?lat=51.5074&lng=-0.1278"
"""
from GeoReverse import GeocodeService
from GeoReverse.api import start_server
from GeoReverse.utils.logging import set_log_level

def main():
    set_log_level('info')
    service = GeocodeService(min_population=15000)
    start_server(host='localhost', port=8080, service=service)

if __name__ == '__main__':
    main()
