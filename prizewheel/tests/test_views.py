import json
from unittest import mock

import requests
from django.db import DatabaseError
from django.test import Client, TestCase, override_settings

from prizewheel.models import Prize, Spin
from prizewheel.services import WheelContext

CADEAU_TABLE = [
    {"value": "CADEAU1", "weight": 1000, "kind": "gift"},
    {"value": "-10%", "weight": 1, "kind": "discount", "discount_percent": 10},
    {"value": "nothing", "weight": 1, "kind": "nothing"},
]
DISCOUNT_TABLE = [{"value": "-10%", "weight": 1, "kind": "discount", "discount_percent": 10}]


class AlwaysFirst:
    def random(self):
        return 0.0


def context_for(table):
    return lambda: WheelContext.from_entries(table, rng=AlwaysFirst())


@override_settings(REDIS_URL=None)
class PrizeListAPITests(TestCase):
    def setUp(self):
        self.client = Client()

    def test_lists_catalog_in_id_order(self):
        Prize.objects.create(value="nothing", name="Rien")
        Prize.objects.create(value="CADEAU1", name="Cadeau", stock=2)

        response = self.client.get("/prizes/")

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual([item["value"] for item in payload], ["nothing", "CADEAU1"])
        self.assertEqual(set(payload[1]), {"id", "value", "name", "stock"})
        self.assertEqual(payload[1]["stock"], 2)
        self.assertIsNone(payload[0]["stock"])

    def test_rejects_other_methods(self):
        self.assertEqual(self.client.post("/prizes/").status_code, 405)


@override_settings(
    REDIS_URL=None,
    SHOPIFY_STORE_DOMAIN="shop.example.com",
    SHOPIFY_ADMIN_API_ACCESS_TOKEN="token",
)
class SpinAPITests(TestCase):
    def setUp(self):
        self.client = Client()
        self.gift = Prize.objects.create(value="CADEAU1", name="Cadeau surprise", stock=1)
        Prize.objects.create(value="-10%", name="-10% sur ta commande")
        Prize.objects.create(value="nothing", name="Rien")

    def post_spin(self, payload):
        return self.client.post("/spin/", data=json.dumps(payload), content_type="application/json")

    def test_missing_user_is_rejected(self):
        for payload in ({}, {"userId": ""}, {"userId": "   "}):
            with self.subTest(payload=payload):
                response = self.post_spin(payload)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(
                    response.json(),
                    {"ok": False, "message": "Il faut être connecté pour jouer."},
                )
        self.assertEqual(Spin.objects.count(), 0)

    def test_invalid_json_is_rejected(self):
        for body in ("{not json", "[1, 2]"):
            with self.subTest(body=body):
                response = self.client.post("/spin/", data=body, content_type="application/json")

                self.assertEqual(response.status_code, 400)
                self.assertEqual(
                    response.json(),
                    {"ok": False, "message": "Requête invalide : le corps doit être un objet JSON."},
                )
        self.assertFalse(Spin.objects.exists())

    def test_rejects_get(self):
        self.assertEqual(self.client.get("/spin/").status_code, 405)

    @mock.patch("prizewheel.views.WheelContext.from_settings", side_effect=context_for(CADEAU_TABLE))
    def test_second_spin_same_day_is_rejected(self, _context):
        self.assertEqual(self.post_spin({"userId": "alice"}).status_code, 200)

        response = self.post_spin({"userId": "alice"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Tu as déjà joué aujourd'hui !")
        self.assertEqual(Spin.objects.filter(user_id="alice").count(), 1)

    @mock.patch("prizewheel.views.WheelContext.from_settings", side_effect=context_for(CADEAU_TABLE))
    def test_last_gift_unit_goes_to_first_winner_only(self, _context):
        first = self.post_spin({"userId": "alice"})

        self.assertEqual(first.status_code, 200)
        self.assertEqual(
            first.json(),
            {"ok": True, "prizeValue": "CADEAU1", "prizeName": "Cadeau surprise", "couponCode": None},
        )
        self.gift.refresh_from_db()
        self.assertEqual(self.gift.stock, 0)

        second = self.post_spin({"userId": "bob"})

        self.assertEqual(second.status_code, 200)
        payload = second.json()
        self.assertTrue(payload["ok"])
        self.assertNotEqual(payload["prizeValue"], "CADEAU1")
        self.assertIn(payload["prizeValue"], {"-10%", "nothing"})
        self.assertIsNone(payload["couponCode"])
        self.gift.refresh_from_db()
        self.assertEqual(self.gift.stock, 0)

    @mock.patch("daily_spin.shopify_client.requests.post", side_effect=requests.ConnectionError("unreachable"))
    @mock.patch("prizewheel.views.WheelContext.from_settings", side_effect=context_for(DISCOUNT_TABLE))
    def test_unreachable_coupon_service_keeps_the_spin(self, _context, post):
        response = self.post_spin({"userId": "carol"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"ok": True, "prizeValue": "-10%", "prizeName": "-10% sur ta commande", "couponCode": None},
        )
        self.assertTrue(post.called)
        self.assertTrue(Spin.objects.filter(user_id="carol", prize_value="-10%").exists())

    @mock.patch("daily_spin.shopify_client.requests.post")
    @mock.patch("prizewheel.views.WheelContext.from_settings", side_effect=context_for(DISCOUNT_TABLE))
    def test_discount_spin_carries_coupon_code(self, _context, post):
        rule_response = mock.Mock()
        rule_response.json.return_value = {"price_rule": {"id": 42}}
        code_response = mock.Mock()
        code_response.json.return_value = {"discount_code": {"code": "10-CAFEBABE"}}
        post.side_effect = [rule_response, code_response]

        response = self.post_spin({"userId": "dave"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["couponCode"], "10-CAFEBABE")
        self.assertEqual(post.call_count, 2)

    @mock.patch("prizewheel.services.record_spin", side_effect=DatabaseError("disk full"))
    def test_persistence_failure_is_server_error(self, _record):
        response = self.post_spin({"userId": "erin"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"ok": False, "message": "Erreur serveur"})

    @mock.patch("prizewheel.views.WheelContext.from_settings", side_effect=context_for(CADEAU_TABLE))
    def test_accepts_path_without_trailing_slash(self, _context):
        response = self.client.post(
            "/spin", data=json.dumps({"userId": "frank"}), content_type="application/json"
        )

        self.assertEqual(response.status_code, 200)

    @override_settings(PRIZEWHEEL_RATE_LIMIT=1)
    @mock.patch("prizewheel.ratelimit.hit", return_value=False)
    @mock.patch("prizewheel.ratelimit._redis_client")
    def test_rate_limit_returns_429(self, _client, _hit):
        response = self.post_spin({"userId": "gina"})

        self.assertEqual(response.status_code, 429)
        self.assertFalse(Spin.objects.exists())

    @override_settings(CORS_ALLOW_ALL_ORIGINS=True, CORS_ALLOWED_ORIGINS=[])
    def test_cors_headers_are_sent(self):
        response = self.client.options(
            "/spin/",
            HTTP_ORIGIN="https://shop.example.com",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Access-Control-Allow-Origin"], "*")
        self.assertIn("POST", response["Access-Control-Allow-Methods"])

    @override_settings(CORS_ALLOW_ALL_ORIGINS=False, CORS_ALLOWED_ORIGINS=["https://shop.example.com"])
    def test_cors_only_answers_allowed_origins(self):
        allowed = self.client.get("/prizes/", HTTP_ORIGIN="https://shop.example.com")
        other = self.client.get("/prizes/", HTTP_ORIGIN="https://evil.example.com")

        self.assertEqual(allowed["Access-Control-Allow-Origin"], "https://shop.example.com")
        self.assertNotIn("Access-Control-Allow-Origin", other)
