import asyncio
import os

import pytest

from nemo_provider.model import Model


class TestLiveNemo:

    @pytest.mark.skipif(not os.getenv("RUN_NETWORK_TESTS"), reason="Network tests disabled")
    def test_fetch_real_form(self):
        """Fetch a real form using NEMO_HOST_TOKEN and NEMO_FORM_ID."""
        host_token = os.getenv("NEMO_HOST_TOKEN")
        form_id = os.getenv("NEMO_FORM_ID")
        if not host_token or not form_id:
            pytest.skip("NEMO_HOST_TOKEN and NEMO_FORM_ID are required")

        geojson = asyncio.run(Model().get_data({"params": {"host": host_token, "id": form_id}}))

        assert geojson["type"] == "FeatureCollection"
        assert geojson["metadata"]["idField"] == "ResponseID"
        for feature in geojson["features"]:
            assert feature["type"] == "Feature"
            if "geometry" in feature:
                assert len(feature["geometry"]["coordinates"]) == 2
