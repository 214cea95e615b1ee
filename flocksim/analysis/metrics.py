import numpy as np
from scipy.sparse import csgraph, csr_matrix
from scipy.spatial.distance import pdist, squareform


def calculate_order_parameter(vel):
    """
    Calculates the global polarization (order parameter).
    phi = | sum(v_i / |v_i|) | / N
    Closer to 1 means aligned, 0 means disordered.
    """
    speeds = np.linalg.norm(vel, axis=1, keepdims=True)
    # Avoid division by zero for stationary agents
    valid = speeds.flatten() > 1e-6
    if not np.any(valid):
        return 0.0

    normalized_vel = vel[valid] / speeds[valid]
    sum_vel = np.sum(normalized_vel, axis=0)
    return float(np.linalg.norm(sum_vel) / vel.shape[0])


def calculate_fragmentation(pos, connection_radius):
    """
    Calculates the number of connected components and the size of the largest cluster.
    Two agents are connected if dist(i, j) < connection_radius.
    Brute force over all pairs, which is fine at flock sizes of a few hundred.
    """
    N = pos.shape[0]
    if N == 0:
        return 0, 0

    adj = squareform(pdist(pos)) < connection_radius
    np.fill_diagonal(adj, False)
    if not np.any(adj):
        return N, 1  # All isolated

    n_components, labels = csgraph.connected_components(
        csr_matrix(adj.astype(float)), directed=False
    )

    _, counts = np.unique(labels, return_counts=True)
    return int(n_components), int(np.max(counts))


def calculate_mean_speed(vel):
    return float(np.mean(np.linalg.norm(vel, axis=1)))


def calculate_centroid(pos):
    return np.mean(pos, axis=0)
