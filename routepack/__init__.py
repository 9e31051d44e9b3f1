"""
routepack: сборка единого .bat со статическими маршрутами для обхода блокировок.

Modules:
- ip: IPv4 dotted-quad -> uint32
- parser: parse `route add ... mask ... 0.0.0.0` lines into RouteEntry
- merger: merge routes across services and their sources
- repacker: format routes back into .bat lines and write them out
- catalog: service catalog model and JSON loader
- sources: load bundled .bat assets and resolve source descriptors
- filters: search / category / restriction filters for services
- registry: filter + selection state over the catalog
- reporter: markdown export report
"""
