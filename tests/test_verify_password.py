import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

import verify_password
from tests.helpers import ADMIN_PASSWORD, ADMIN_PASSWORD_HASH


class VerifyPasswordScriptTests(unittest.TestCase):
    def run_main(self, argv, passwords=()):
        output = io.StringIO()
        with mock.patch("verify_password.getpass.getpass", side_effect=list(passwords)), redirect_stdout(output):
            code = verify_password.main(argv)
        return code, output.getvalue()

    def test_usage_without_arguments(self):
        code, output = self.run_main([])
        self.assertEqual(code, 1)
        self.assertIn("Usage:", output)

    def test_generate(self):
        code, output = self.run_main(["--generate"], passwords=["pw", "pw"])
        self.assertEqual(code, 0)
        self.assertIn("ADMIN_PASSWORD_HASH=$2b$", output)

    def test_generate_mismatch(self):
        _, output = self.run_main(["--generate"], passwords=["pw", "other"])
        self.assertIn("Passwords do not match", output)
        self.assertNotIn("ADMIN_PASSWORD_HASH=", output)

    def test_check(self):
        _, output = self.run_main([ADMIN_PASSWORD_HASH], passwords=[ADMIN_PASSWORD])
        self.assertIn("Password matches!", output)

        _, output = self.run_main([ADMIN_PASSWORD_HASH], passwords=["nope"])
        self.assertIn("Password does not match.", output)


if __name__ == "__main__":
    unittest.main()
