"""
Services built on the trip repository and the ambient client stores.
"""
