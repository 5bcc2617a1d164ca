"""
Batch generation of independent ionising collisions.

Each event is drawn at the same incident energy; successive collisions
are not chained. Draws whose kinematics turn out non-physical are
rejected and redrawn.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from tqdm import tqdm

from inelastic_mc.config.settings import SamplingConfig
from inelastic_mc.config.yaml_loader import get_default
from inelastic_mc.core.species import Species, resolve_species
from inelastic_mc.exceptions import NonPhysicalKinematicsError
from inelastic_mc.physics.cross_sections import CalcType, resolve_calc_type
from inelastic_mc.physics.inelastic import InelasticScatter

logger = logging.getLogger(__name__)


@dataclass
class EventBatch:
    """
    Sampled events as parallel arrays.

    Attributes:
        energy_transfer: W per event [eV]
        secondary_angle: θ per event [rad]
        primary_energy: E1' per event [eV]
        primary_angle: θ1' per event [rad]
        n_rejected: Draws rejected for non-physical kinematics
    """
    energy_transfer: np.ndarray
    secondary_angle: np.ndarray
    primary_energy: np.ndarray
    primary_angle: np.ndarray
    n_rejected: int = 0

    @property
    def n_events(self) -> int:
        return self.energy_transfer.size

    @property
    def acceptance(self) -> float:
        """Fraction of draws that produced a physical event."""
        n_draws = self.n_events + self.n_rejected
        return self.n_events / n_draws if n_draws > 0 else 0.0

    @classmethod
    def empty(cls) -> "EventBatch":
        return cls(*(np.empty(0) for _ in range(4)))

    @classmethod
    def concatenate(cls, batches) -> "EventBatch":
        batches = list(batches)
        if not batches:
            return cls.empty()
        return cls(
            energy_transfer=np.concatenate([b.energy_transfer for b in batches]),
            secondary_angle=np.concatenate([b.secondary_angle for b in batches]),
            primary_energy=np.concatenate([b.primary_energy for b in batches]),
            primary_angle=np.concatenate([b.primary_angle for b in batches]),
            n_rejected=sum(b.n_rejected for b in batches),
        )

    def summary(self) -> dict:
        """Simple statistics of the batch."""
        if self.n_events == 0:
            return {'n_events': 0, 'n_rejected': self.n_rejected, 'acceptance': 0.0}
        return {
            'n_events': self.n_events,
            'n_rejected': self.n_rejected,
            'acceptance': self.acceptance,
            'mean_energy_transfer': float(np.mean(self.energy_transfer)),
            'mean_secondary_angle': float(np.mean(self.secondary_angle)),
            'mean_primary_energy': float(np.mean(self.primary_energy)),
            'mean_primary_angle': float(np.mean(self.primary_angle)),
        }


# Scatter instance for each worker process
_worker_scatter = None


def _init_worker(calc_type, species, incident_energy, temperature, sampling):
    """Initialize worker process with its own scatter instance."""
    global _worker_scatter
    _worker_scatter = InelasticScatter(temperature, calc_type, species,
                                       incident_energy=incident_energy,
                                       sampling=sampling)


def _generate_worker(work_item):
    """Generate one chunk of events with a generator spawned for this chunk."""
    _worker_scatter.seed(work_item['seed_sequence'])
    return _draw_events(_worker_scatter, work_item['n_events'],
                        work_item['max_attempts'], progress=False)


def _draw_events(scatter: InelasticScatter, n_events: int, max_attempts: int,
                 progress: bool) -> EventBatch:
    W = np.empty(n_events)
    theta = np.empty(n_events)
    E1 = np.empty(n_events)
    theta1 = np.empty(n_events)

    n_accepted = 0
    n_rejected = 0
    with tqdm(total=n_events, disable=not progress, desc="Sampling", unit="evt") as bar:
        while n_accepted < n_events:
            if n_accepted + n_rejected >= max_attempts:
                raise RuntimeError(
                    f"Gave up after {max_attempts} draws: {n_rejected} rejected for "
                    f"non-physical kinematics, {n_accepted}/{n_events} accepted "
                    f"({scatter!r})"
                )
            try:
                event = scatter.sample_event()
            except NonPhysicalKinematicsError as e:
                n_rejected += 1
                logger.debug("Rejected draw: %s", e)
                continue

            W[n_accepted] = event.energy_transfer
            theta[n_accepted] = event.secondary_angle
            E1[n_accepted] = event.primary_energy
            theta1[n_accepted] = event.primary_angle
            n_accepted += 1
            bar.update(1)

    if n_rejected:
        logger.warning("%d of %d draws rejected for non-physical kinematics",
                       n_rejected, n_accepted + n_rejected)
    return EventBatch(W, theta, E1, theta1, n_rejected=n_rejected)


class EventGenerator:
    """
    Generates independent ionising collisions at a fixed incident energy.

    Example:
        generator = EventGenerator('rudd1991', 'H', incident_energy=100.0, seed=7)
        batch = generator.generate(10000)
        print(batch.summary())
    """

    def __init__(self, calc_type: Union[CalcType, str, None] = None,
                 species: Union[Species, str, None] = None,
                 incident_energy: float = 100.0,
                 temperature: Optional[float] = None,
                 seed: Optional[int] = None,
                 sampling: Optional[SamplingConfig] = None):
        """
        Initialize event generator.

        Parameters:
            calc_type: Cross-section family (defaults.yaml if None)
            species: Target species (defaults.yaml if None)
            incident_energy: Incident kinetic energy [eV]
            temperature: Gas temperature [K] (defaults.yaml if None)
            seed: Root seed; the same seed reproduces the same batch
            sampling: Sampling bin counts (defaults.yaml if None)
        """
        self.calc_type = resolve_calc_type(
            calc_type if calc_type is not None else get_default('model.calc_type', 'rudd1991'))
        self.species = resolve_species(
            species if species is not None else get_default('model.species', 'H'))
        self.temperature = float(
            temperature if temperature is not None else get_default('model.temperature', 0.0))
        self.sampling = sampling if sampling is not None else SamplingConfig.from_defaults()
        self.max_attempts_factor = int(get_default('generation.max_attempts_factor', 10))

        self.seed_sequence = np.random.SeedSequence(seed)
        self.scatter = InelasticScatter(
            self.temperature, self.calc_type, self.species,
            incident_energy=incident_energy,
            rng=np.random.default_rng(self.seed_sequence),
            sampling=self.sampling,
        )

    @property
    def incident_energy(self) -> float:
        return self.scatter.incident_energy

    @incident_energy.setter
    def incident_energy(self, energy_eV: float):
        self.scatter.incident_energy = energy_eV

    def _max_attempts(self, n_events: int) -> int:
        return max(n_events * self.max_attempts_factor, self.max_attempts_factor)

    def generate(self, n_events: int, verbose: bool = False) -> EventBatch:
        """
        Generate events serially with the generator's own random stream.

        Parameters:
            n_events: Number of accepted events to produce
            verbose: Show a progress bar and log a summary

        Returns:
            EventBatch with n_events entries

        Raises:
            RuntimeError: If too many draws are rejected
        """
        start_time = time.time()
        batch = _draw_events(self.scatter, n_events, self._max_attempts(n_events), verbose)
        elapsed = time.time() - start_time

        if verbose:
            logger.info("Generated %d events in %.1fs (%.0f events/sec, acceptance %.3f)",
                        n_events, elapsed, n_events / max(elapsed, 1e-12), batch.acceptance)
        return batch

    def generate_parallel(self, n_events: int, n_processes: Optional[int] = None,
                          n_chunks: Optional[int] = None) -> EventBatch:
        """
        Generate events in parallel using multiprocessing.

        The work is split into chunks; each chunk draws from a generator
        spawned from this generator's seed sequence, so a fixed seed and
        chunk count reproduce the batch regardless of scheduling.

        Parameters:
            n_events: Number of accepted events to produce
            n_processes: Number of worker processes (default: cpu_count)
            n_chunks: Number of chunks (default: n_processes)

        Returns:
            EventBatch with n_events entries
        """
        import multiprocessing as mp

        if n_processes is None:
            n_processes = mp.cpu_count()
        if n_chunks is None:
            n_chunks = n_processes

        counts = [len(c) for c in np.array_split(np.arange(n_events), n_chunks)]
        seeds = self.seed_sequence.spawn(n_chunks)
        work_items = [
            {'n_events': count, 'seed_sequence': seq, 'max_attempts': self._max_attempts(count)}
            for count, seq in zip(counts, seeds) if count > 0
        ]

        start_time = time.time()
        with mp.Pool(n_processes, initializer=_init_worker,
                     initargs=(self.calc_type, self.species, self.incident_energy,
                               self.temperature, self.sampling)) as pool:
            results = pool.map(_generate_worker, work_items)
        elapsed = time.time() - start_time

        batch = EventBatch.concatenate(results)
        logger.info("Parallel generation: %d events on %d processes in %.1fs",
                    batch.n_events, n_processes, elapsed)
        return batch
