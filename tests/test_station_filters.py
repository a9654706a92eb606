import unittest

from bson import ObjectId

from evstations.services.station_filters import (
    BoundingBox,
    ConnectorEquals,
    NameContains,
    OwnerEquals,
    PowerEquals,
    StatusEquals,
    compose_filters,
    matches_all,
    parse_float,
    parse_int,
    to_mongo_query,
)


class ParseTests(unittest.TestCase):
    def test_parse_float_prefix_and_invalid(self):
        self.assertEqual(parse_float("12.5"), 12.5)
        self.assertEqual(parse_float(" 22kw"), 22.0)
        self.assertEqual(parse_float("0"), 0.0)
        self.assertIsNone(parse_float("abc"))
        self.assertIsNone(parse_float(""))
        self.assertIsNone(parse_float(None))
        self.assertIsNone(parse_float("inf"))
        self.assertIsNone(parse_float(float("nan")))

    def test_parse_int(self):
        self.assertEqual(parse_int("3"), 3)
        self.assertEqual(parse_int("2.9"), 2)
        self.assertEqual(parse_int("-4"), -4)
        self.assertIsNone(parse_int("x1"))
        self.assertIsNone(parse_int(None))


class ComposeFiltersTests(unittest.TestCase):
    def test_no_params_matches_everything(self):
        predicates = compose_filters({})
        self.assertEqual(predicates, [])
        self.assertEqual(to_mongo_query(predicates), {})

    def test_order_follows_parameters(self):
        user_id = str(ObjectId())
        predicates = compose_filters(
            {
                "getByUserId": "true",
                "connectorType": " CCS ",
                "longitude": "77.4",
                "latitude": "23.3",
                "powerOutput": "150",
                "status": "Active ",
                "search": "  hub ",
            },
            user_id=user_id,
        )
        self.assertEqual(
            [type(p) for p in predicates],
            [NameContains, StatusEquals, PowerEquals, ConnectorEquals, BoundingBox, OwnerEquals],
        )
        self.assertEqual(predicates[0], NameContains("hub"))
        self.assertEqual(predicates[1], StatusEquals("Active"))
        self.assertEqual(predicates[3], ConnectorEquals("CCS"))
        self.assertEqual(predicates[5], OwnerEquals(user_id))

    def test_blank_search_is_omitted(self):
        self.assertEqual(compose_filters({"search": "   "}), compose_filters({}))
        self.assertEqual(compose_filters({"search": ""}), [])

    def test_zero_power_output_is_kept(self):
        self.assertEqual(compose_filters({"powerOutput": "0"}), [PowerEquals(0.0)])

    def test_unparseable_power_output_is_dropped(self):
        self.assertEqual(compose_filters({"powerOutput": "fast"}), [])

    def test_location_requires_both_coordinates(self):
        self.assertEqual(compose_filters({"latitude": "23.3"}), [])
        self.assertEqual(compose_filters({"latitude": "23.3", "longitude": "north"}), [])

        (box,) = compose_filters({"latitude": "10", "longitude": "20"})
        self.assertAlmostEqual(box.min_lat, 9.95)
        self.assertAlmostEqual(box.max_lat, 10.05)
        self.assertAlmostEqual(box.min_lng, 19.95)
        self.assertAlmostEqual(box.max_lng, 20.05)

    def test_owner_flag_must_be_exact_true(self):
        user_id = str(ObjectId())
        self.assertEqual(compose_filters({"getByUserId": "TRUE"}, user_id=user_id), [])
        self.assertEqual(compose_filters({"getByUserId": "1"}, user_id=user_id), [])
        self.assertEqual(compose_filters({"getByUserId": "true"}, user_id=user_id), [OwnerEquals(user_id)])


class MongoQueryTests(unittest.TestCase):
    def test_query_is_conjunction(self):
        query = to_mongo_query([StatusEquals("Active"), PowerEquals(50.0)])
        self.assertEqual(query, {"$and": [{"status": "Active"}, {"powerOutput": 50.0}]})

    def test_search_is_escaped_case_insensitive_regex(self):
        self.assertEqual(
            NameContains("a.b").to_mongo(),
            {"name": {"$regex": r"a\.b", "$options": "i"}},
        )

    def test_bounding_box_fragment(self):
        fragment = BoundingBox(1.0, 2.0, 3.0, 4.0).to_mongo()
        self.assertEqual(fragment["coordinates.latitude"], {"$gte": 1.0, "$lte": 2.0})
        self.assertEqual(fragment["coordinates.longitude"], {"$gte": 3.0, "$lte": 4.0})

    def test_owner_uses_object_id(self):
        oid = ObjectId()
        self.assertEqual(OwnerEquals(str(oid)).to_mongo(), {"createdBy": oid})


class MatchesTests(unittest.TestCase):
    def setUp(self):
        self.owner = ObjectId()
        self.doc = {
            "name": "Downtown Charging Hub",
            "coordinates": {"latitude": 23.3149, "longitude": 77.3981},
            "status": "Active",
            "powerOutput": 150,
            "connectorType": "CCS",
            "createdBy": self.owner,
        }

    def test_all_predicates_match(self):
        predicates = compose_filters(
            {
                "search": "downtown",
                "status": "Active",
                "powerOutput": "150",
                "connectorType": "CCS",
                "latitude": "23.32",
                "longitude": "77.40",
                "getByUserId": "true",
            },
            user_id=str(self.owner),
        )
        self.assertTrue(matches_all(predicates, self.doc))

    def test_outside_bounding_box(self):
        box = BoundingBox.around(23.5, 77.3981)
        self.assertFalse(box.matches(self.doc))

    def test_missing_coordinates_never_match_box(self):
        box = BoundingBox.around(23.3149, 77.3981)
        self.assertFalse(box.matches({"coordinates": {"latitude": 23.3149}}))

    def test_other_owner(self):
        self.assertFalse(OwnerEquals(str(ObjectId())).matches(self.doc))


if __name__ == "__main__":
    unittest.main()
