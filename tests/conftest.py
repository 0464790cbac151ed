import os

from hypothesis import HealthCheck, settings

# MINSWIFT_HYPOTHESIS_PROFILE=ci for a longer property run
settings.register_profile("dev", max_examples=100, deadline=None)
settings.register_profile(
    "ci",
    max_examples=1000,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("MINSWIFT_HYPOTHESIS_PROFILE", "dev"))
