"""
J-Quants market data source.

Caches the J-Quants ID token, fetches listed-company info and daily quotes
for the TSE Prime market, and joins them into screening records.
"""
