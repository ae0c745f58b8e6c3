"""HTTP surface: routers, dependency wiring, route permissions and error rendering."""
