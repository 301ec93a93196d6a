"""Faker-backed generators of sample batches, offers and specs."""

from parcel_engine.generators.land import BatchGenerator, GenerationSpecGenerator, OfferGenerator

__all__ = ["BatchGenerator", "GenerationSpecGenerator", "OfferGenerator"]
