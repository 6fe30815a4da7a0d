import unittest

import drivemirror


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(drivemirror, "SharedDriveManager"))
        self.assertTrue(hasattr(drivemirror, "FirestoreMirror"))
        self.assertTrue(hasattr(drivemirror, "Settings"))
        self.assertTrue(hasattr(drivemirror, "AuthInfo"))
        self.assertTrue(hasattr(drivemirror, "GoogleCredentials"))
        self.assertTrue(hasattr(drivemirror, "SessionSigner"))

        self.assertTrue(hasattr(drivemirror, "materialize_folder_tree"))
        self.assertTrue(hasattr(drivemirror, "materialize_drive_hierarchy"))
        self.assertTrue(hasattr(drivemirror, "HierarchyView"))

        self.assertTrue(hasattr(drivemirror, "DriveRecord"))
        self.assertTrue(hasattr(drivemirror, "FolderRecord"))
        self.assertTrue(hasattr(drivemirror, "DriveCreationResult"))

        self.assertTrue(hasattr(drivemirror, "DriveMirrorError"))
        self.assertTrue(hasattr(drivemirror, "MirrorDivergenceError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(drivemirror, "__all__"))
        self.assertIn("SharedDriveManager", drivemirror.__all__)
        self.assertIn("DriveMirrorError", drivemirror.__all__)
        for name in drivemirror.__all__:
            self.assertTrue(hasattr(drivemirror, name), name)


if __name__ == "__main__":
    unittest.main()
