from evstations.database.station_store import StationStore

SAMPLE_STATIONS = [
    {
        "name": "Downtown Charging Hub",
        "coordinates": {"latitude": 23.3149, "longitude": 77.3981},
        "status": "Active",
        "powerOutput": 150,
        "connectorType": "CCS",
    },
    {
        "name": "Mall Parking Station",
        "coordinates": {"latitude": 23.3200, "longitude": 77.4020},
        "status": "Active",
        "powerOutput": 100,
        "connectorType": "Type2",
    },
    {
        "name": "Highway Rest Stop",
        "coordinates": {"latitude": 23.3100, "longitude": 77.3900},
        "status": "Maintenance",
        "powerOutput": 250,
        "connectorType": "CHAdeMO",
    },
    {
        "name": "Office Complex Charger",
        "coordinates": {"latitude": 23.3180, "longitude": 77.4050},
        "status": "Active",
        "powerOutput": 50,
        "connectorType": "Type1",
    },
    {
        "name": "Airport Terminal Station",
        "coordinates": {"latitude": 23.3250, "longitude": 77.4100},
        "status": "Inactive",
        "powerOutput": 200,
        "connectorType": "GB/T",
    },
]


def seed_sample_data(store: StationStore, owner_id: str) -> int:
    docs = [dict(s, coordinates=dict(s["coordinates"]), createdBy=owner_id) for s in SAMPLE_STATIONS]
    return store.insert_many(docs)
