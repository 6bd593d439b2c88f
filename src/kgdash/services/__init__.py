"""
Services for kg-dashboard.

- layout: force-directed layout engine and frame scheduler
- analytics: degree statistics, density and community partition
- snapshot: Neo4j snapshot source with caching
- visualization: matplotlib frame renderer
"""
