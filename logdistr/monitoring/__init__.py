"""Host monitoring: configuration, system and network probes, and an HTTP server for them."""