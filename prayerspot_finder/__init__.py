"""Prayer Spot Finder - Share places to pray on a map.

A Streamlit application for browsing, searching and adding prayer spots:
- Map of shared spots with search filtering
- Address geocoding through interchangeable providers
- Signed-in users add spots; creators and admins soft-delete and restore them
- Human-readable country/city/name URLs for every spot

Modules:
    core: Services without UI (record store, geocoders, identity, slugs, search)
    model: Data structures (PrayerSpot, Profile, Identity, SpotDraft, messages)
    ui: Streamlit interface (view-model state machine, marker renderer, pages)

Example:
    from prayerspot_finder.core import RestSpotStore, create_geocoder
    from prayerspot_finder.ui import MapViewModel

    vm, ctx = MapViewModel.create(add_ui_listener=False)
    vm.refresh(store=RestSpotStore())
"""
