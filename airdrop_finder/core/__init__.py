"""
Core utilities: domain exceptions shared by the eligibility engine,
result cache and ingestion fan-out.
"""
