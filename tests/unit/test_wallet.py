from ledgervote.crypto.wallet import Wallet
from ledgervote.formatting import primatives
from unittest import TestCase


class TestWallet(TestCase):
    def test_new_wallet_has_formatted_vk(self):
        w = Wallet()

        self.assertTrue(primatives.vk_is_formatted(w.verifying_key))
        self.assertEqual(len(w.signing_key), 64)

    def test_same_seed_same_keys(self):
        w = Wallet()
        w2 = Wallet(seed=w.signing_key)
        w3 = Wallet(seed=bytes.fromhex(w.signing_key))

        self.assertEqual(w.verifying_key, w2.verifying_key)
        self.assertEqual(w.verifying_key, w3.verifying_key)

    def test_different_wallets_differ(self):
        self.assertNotEqual(Wallet().verifying_key, Wallet().verifying_key)
