"""Agglomerative hierarchical clustering over a small set of labeled observations.

Start with every observation as its own cluster, repeatedly merge the two
closest clusters, and record each merge until a single cluster remains. The
result is a merge tree (dendrogram) of n - 1 merge events.

Cluster distances are Euclidean at the leaves and are updated after each merge
from the two distances they replace:

    complete:  d(A u B, X) = max(d(A, X), d(B, X))
    single:    d(A u B, X) = min(d(A, X), d(B, X))
    average:   d(A u B, X) = (|A| d(A, X) + |B| d(B, X)) / (|A| + |B|)

Ties on the minimum distance go to the pair whose first cluster holds the lowest
original observation index, then to the lowest index in the second cluster, so
the same input always yields the same tree.

Cluster ids follow the scipy dendrogram convention: leaves are 0..n-1 and the
k-th merge creates cluster n + k. ``MergeTree.to_linkage_matrix`` therefore
plugs straight into ``scipy.cluster.hierarchy`` and plotly's dendrogram.

The naive search is O(n^3); intended for tens of entities, not millions.
"""
import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

LINKAGES = ("complete", "single", "average")


class InvalidInputError(ValueError):
    """Raised when a set of observations cannot be clustered."""


@dataclass(frozen=True)
class Observation:
    """An entity label paired with its standardized feature vector."""

    label: str
    features: tuple = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "label", str(self.label))
        try:
            features = tuple(float(v) for v in self.features)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Non-numeric feature for {self.label!r}") from exc
        object.__setattr__(self, "features", features)


@dataclass(frozen=True)
class MergeEvent:
    """One merge: clusters ``left`` and ``right`` joined at ``height`` into ``cluster_id``.

    ``members`` holds the original observation indices of the new cluster, sorted.
    """

    left: int
    right: int
    height: float
    cluster_id: int
    size: int
    members: tuple


@dataclass(frozen=True)
class MergeTree:
    """Ordered merge events produced by :func:`cluster`."""

    labels: tuple
    events: tuple
    linkage: str

    @property
    def n_leaves(self):
        return len(self.labels)

    @property
    def heights(self):
        return [event.height for event in self.events]

    @property
    def root_members(self):
        """Labels in the final cluster, in original observation order."""
        return tuple(self.labels[i] for i in self.events[-1].members)

    def to_linkage_matrix(self):
        """Return a scipy-compatible ``(n - 1, 4)`` array of [left, right, height, size]."""
        return np.array(
            [[e.left, e.right, e.height, e.size] for e in self.events], dtype=float
        )

    def _children(self):
        return {e.cluster_id: (e.left, e.right) for e in self.events}

    def _leaf_indices(self):
        children = self._children()
        order = []
        stack = [self.events[-1].cluster_id]
        while stack:
            node = stack.pop()
            if node < self.n_leaves:
                order.append(node)
            else:
                left, right = children[node]
                stack.append(right)
                stack.append(left)
        return order

    def leaf_order(self):
        """Leaf labels from left to right as a dendrogram would draw them."""
        return [self.labels[i] for i in self._leaf_indices()]

    def _flat_clusters(self, n_merges):
        groups = {i: (i,) for i in range(self.n_leaves)}
        for event in self.events[:n_merges]:
            del groups[event.left]
            del groups[event.right]
            groups[event.cluster_id] = event.members

        position = {leaf: pos for pos, leaf in enumerate(self._leaf_indices())}
        ordered = sorted(groups.values(), key=lambda m: min(position[i] for i in m))
        assignment = {}
        for number, members in enumerate(ordered, start=1):
            for i in members:
                assignment[i] = number
        return pd.Series(
            [assignment[i] for i in range(self.n_leaves)],
            index=list(self.labels), name="cluster",
        )

    def cut(self, n_clusters):
        """Flat clusters obtained by undoing the last ``n_clusters - 1`` merges.

        Clusters are numbered 1..k in dendrogram leaf order.
        """
        if not 1 <= n_clusters <= self.n_leaves:
            raise InvalidInputError(
                f"n_clusters must be between 1 and {self.n_leaves}, got {n_clusters}"
            )
        return self._flat_clusters(self.n_leaves - n_clusters)

    def cut_height(self, height):
        """Flat clusters formed by every merge at or below ``height``."""
        n_merges = 0
        for event in self.events:
            if event.height > height:
                break
            n_merges += 1
        return self._flat_clusters(n_merges)


def pairwise_distances(matrix):
    """Full Euclidean distance matrix between the rows of ``matrix``.

    Computed from explicit differences so the result is exactly symmetric with
    a zero diagonal.
    """
    X = np.asarray(matrix, dtype=float)
    if X.ndim != 2:
        raise InvalidInputError(f"Expected a 2D matrix, got {X.ndim} dimensions")
    diff = X[:, np.newaxis, :] - X[np.newaxis, :, :]
    return np.sqrt(np.sum(diff ** 2, axis=-1))


def _pair(a, b):
    return (a, b) if a < b else (b, a)


def _updated_distance(linkage, d_left, d_right, size_left, size_right):
    if linkage == "complete":
        return max(d_left, d_right)
    if linkage == "single":
        return min(d_left, d_right)
    return (size_left * d_left + size_right * d_right) / (size_left + size_right)


def _validate(observations, linkage):
    if linkage not in LINKAGES:
        raise InvalidInputError(
            f"Unknown linkage {linkage!r}; expected one of {', '.join(LINKAGES)}"
        )
    if len(observations) < 2:
        raise InvalidInputError(
            f"At least 2 observations are required, got {len(observations)}"
        )

    dims = {len(obs.features) for obs in observations}
    if len(dims) > 1:
        raise InvalidInputError(
            f"All observations must have the same number of features, got {sorted(dims)}"
        )
    if dims == {0}:
        raise InvalidInputError("Observations have no features")

    labels = [obs.label for obs in observations]
    duplicates = sorted({label for label in labels if labels.count(label) > 1})
    if duplicates:
        raise InvalidInputError(f"Duplicate observation labels: {duplicates}")

    matrix = np.array([obs.features for obs in observations], dtype=float)
    bad_rows = ~np.isfinite(matrix).all(axis=1)
    if bad_rows.any():
        bad = [labels[i] for i in np.flatnonzero(bad_rows)]
        raise InvalidInputError(f"Missing or non-finite values for: {bad}")
    return matrix


def cluster(observations, linkage="complete"):
    """Build the merge tree for ``observations`` under ``linkage``.

    Raises :class:`InvalidInputError` for fewer than two observations,
    mismatched feature lengths, duplicate labels, missing/non-finite values or
    an unknown linkage.
    """
    observations = list(observations)
    matrix = _validate(observations, linkage)
    n = len(observations)
    D = pairwise_distances(matrix)

    members = {i: (i,) for i in range(n)}
    distances = {}
    for i in range(n):
        for j in range(i + 1, n):
            distances[(i, j)] = float(D[i, j])

    events = []
    for step in range(n - 1):
        # Members are kept sorted, so members[c][0] is the cluster's lowest index
        active = sorted(members, key=lambda c: members[c][0])
        best = None
        for pos, a in enumerate(active):
            for b in active[pos + 1:]:
                d = distances[_pair(a, b)]
                if best is None or d < best[0]:
                    best = (d, a, b)

        height, left, right = best
        new_id = n + step
        size_left, size_right = len(members[left]), len(members[right])

        for other in members:
            if other in (left, right):
                continue
            distances[_pair(new_id, other)] = _updated_distance(
                linkage,
                distances.pop(_pair(left, other)),
                distances.pop(_pair(right, other)),
                size_left, size_right,
            )
        del distances[_pair(left, right)]

        merged = tuple(sorted(members.pop(left) + members.pop(right)))
        members[new_id] = merged
        events.append(MergeEvent(
            left=left, right=right, height=height,
            cluster_id=new_id, size=len(merged), members=merged,
        ))
        logger.debug("Merge %d: %d + %d -> %d at %.4f", step, left, right, new_id, height)

    logger.info("Clustered %d observations with %s linkage", n, linkage)
    return MergeTree(
        labels=tuple(obs.label for obs in observations),
        events=tuple(events),
        linkage=linkage,
    )


def observations_from_frame(frame):
    """One observation per row; the index supplies the labels."""
    return [
        Observation(label=label, features=tuple(row))
        for label, row in zip(frame.index, frame.to_numpy(dtype=float))
    ]


def cluster_frame(frame, linkage="complete"):
    """Cluster the rows of a DataFrame of (already standardized) features."""
    return cluster(observations_from_frame(frame), linkage=linkage)
