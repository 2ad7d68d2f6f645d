"""
Blade Element Momentum Theory (BEMT) solver.

Per-station fixed-point iteration on the inflow angle phi:
- Prandtl tip and hub loss: F = (2/pi) * acos(exp(-f)),
  f_tip = (B/2)(R - r)/(r|phi|), f_hub = (B/2)(r - r_hub)/(r_hub|phi|)
- Solidity sigma = c*B/(2*pi*r), pitch angle beta = atan(P/(2*pi*r)),
  alpha = beta - phi (positive when the blade pitch exceeds the inflow)
- Induction: a = x/(1+x), x = sigma*Cl/(4*F*sin(phi));
  a' = y/(1+y), y = sigma*Cd/(4*F*cos(phi))
- phi = atan(V/(1+a) / (omega*r*(1-a')/(1+a)))

Loads are integrated over uniform-width stations:
  T = sum(dL*cos(phi) - dD*sin(phi)),  Q = sum(r*(dL*sin(phi) + dD*cos(phi)))

Degenerate inputs (zero radial span, zero rpm) propagate NaN/inf through
the results unless the solver is strict. Zero forward speed is a regular
static-thrust operating point: phi = 0, alpha = beta and a saturates at 0.9.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple
import logging
import math
import numpy as np
from numpy.typing import NDArray

from ..geometry.airfoil_config import AirfoilPolar, CustomAirfoil
from ..geometry.distribution import RadialDistributionModel
from ..geometry.propeller import PropellerParams

logger = logging.getLogger(__name__)

# Reynolds number for polar lookup is taken at this fraction of tip radius
REFERENCE_RADIUS_FRACTION = 0.75

RPM_FACTORS = tuple(0.5 + 0.1 * k for k in range(10))


class NumericDegenerate(ArithmeticError):
    """Raised by a strict solver for inputs that make the solve meaningless."""
    pass


@dataclass
class OperatingConditions:
    """
    Operating point for a BEMT solve.
    """
    velocity: float = 10.0               # V (m/s)
    rpm: float = 1000.0                  # n (rev/min)
    air_density: float = 1.225           # ρ (kg/m³)
    kinematic_viscosity: float = 1.5e-5  # ν (m²/s)

    @property
    def omega(self) -> float:
        """Angular velocity (rad/s)."""
        return self.rpm * 2 * math.pi / 60

    def reynolds_number(self, chord: float, radius: float) -> float:
        """Section Reynolds number from the undisturbed relative velocity."""
        v_rel = math.hypot(self.velocity, self.omega * radius)
        return v_rel * chord / self.kinematic_viscosity

    def to_dict(self) -> dict:
        return {
            "velocity": self.velocity,
            "rpm": self.rpm,
            "air_density": self.air_density,
            "kinematic_viscosity": self.kinematic_viscosity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OperatingConditions":
        return cls(
            velocity=data.get("velocity", 10.0),
            rpm=data.get("rpm", 1000.0),
            air_density=data.get("air_density", 1.225),
            kinematic_viscosity=data.get("kinematic_viscosity", 1.5e-5),
        )


@dataclass(frozen=True)
class SolverSettings:
    """Numerical settings of the BEMT iteration."""
    num_stations: int = 20
    tolerance: float = 1e-6          # |Δφ| convergence threshold [rad]
    max_iterations: int = 100
    loss_floor: float = 1e-4         # loss factor used when f overflows
    loss_exponent_limit: float = 700.0
    cl_min: float = -2.0
    cl_max: float = 2.0
    cd_min: float = 0.005


@dataclass
class StationResult:
    """Converged (or last) state at one radial station."""
    radius: float
    phi: float
    a: float
    a_prime: float
    aoa: float
    cl: float
    cd: float
    induced_velocity: float
    lift: float
    drag: float
    iterations: int
    converged: bool


@dataclass
class BEMTResult:
    """
    Integrated loads and per-station distributions at one operating point.

    Per-station arrays are index-aligned with the solver's station grid.
    """
    thrust: float         # T (N)
    torque: float         # Q (N·m)
    power: float          # P (W)
    efficiency: float     # η (%), clamped to [0, 100]
    ct: float
    cq: float
    cp: float
    advance_ratio: float  # J = V/(nD)

    local_induced_velocity: NDArray[np.float64]
    local_aoa: NDArray[np.float64]
    local_cl: NDArray[np.float64]
    local_cd: NDArray[np.float64]
    local_lift: NDArray[np.float64]
    local_drag: NDArray[np.float64]

    # Convergence diagnostics
    iterations: NDArray[np.int_]
    converged: NDArray[np.bool_]

    @property
    def all_converged(self) -> bool:
        """True if every station met the tolerance."""
        return bool(np.all(self.converged))

    @property
    def num_stations(self) -> int:
        return len(self.local_aoa)

    def to_dict(self) -> dict:
        return {
            "thrust": self.thrust,
            "torque": self.torque,
            "power": self.power,
            "efficiency": self.efficiency,
            "ct": self.ct,
            "cq": self.cq,
            "cp": self.cp,
            "advanceRatio": self.advance_ratio,
            "localInducedVelocity": self.local_induced_velocity.tolist(),
            "localAoA": self.local_aoa.tolist(),
            "localCl": self.local_cl.tolist(),
            "localCd": self.local_cd.tolist(),
            "localLift": self.local_lift.tolist(),
            "localDrag": self.local_drag.tolist(),
            "iterations": self.iterations.tolist(),
            "converged": self.converged.tolist(),
        }


@dataclass
class PerformanceCurves:
    """Scalar results over an RPM sweep at fixed forward speed."""
    rpm: NDArray[np.float64]
    thrust: NDArray[np.float64]
    torque: NDArray[np.float64]
    power: NDArray[np.float64]
    efficiency: NDArray[np.float64]
    ct: NDArray[np.float64]
    cq: NDArray[np.float64]
    cp: NDArray[np.float64]
    advance_ratio: NDArray[np.float64]

    def __len__(self) -> int:
        return len(self.rpm)

    def to_dict(self) -> dict:
        return {
            "rpm": self.rpm.tolist(),
            "thrust": self.thrust.tolist(),
            "torque": self.torque.tolist(),
            "power": self.power.tolist(),
            "efficiency": self.efficiency.tolist(),
            "ct": self.ct.tolist(),
            "cq": self.cq.tolist(),
            "cp": self.cp.tolist(),
            "advanceRatio": self.advance_ratio.tolist(),
        }


@dataclass
class EfficiencyMap:
    """
    Design-space scan over advance ratio and RPM multiplier.

    Grids are indexed [advance_ratio_step][rpm_multiplier_step].
    """
    advance_ratio: NDArray[np.float64]  # (j_steps,)
    rpm: NDArray[np.float64]            # (10,) swept RPM values
    rpm_factors: NDArray[np.float64]    # (10,) multipliers of nominal RPM
    ct: NDArray[np.float64]             # (j_steps, 10)
    cq: NDArray[np.float64]
    efficiency: NDArray[np.float64]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.ct.shape

    def to_dict(self) -> dict:
        return {
            "advanceRatio": self.advance_ratio.tolist(),
            "rpm": self.rpm.tolist(),
            "rpmFactors": self.rpm_factors.tolist(),
            "ct": self.ct.tolist(),
            "cq": self.cq.tolist(),
            "efficiency": self.efficiency.tolist(),
        }


def prandtl_loss(f: float, floor: float = 1e-4, limit: float = 700.0) -> float:
    """
    Prandtl loss factor (2/π)·acos(e^-f).

    Returns floor when f exceeds limit so the factor never underflows
    to exactly zero.
    """
    if f > limit:
        return floor
    return float((2 / np.pi) * np.arccos(np.exp(-f)))


class BEMTSolver:
    """
    BEMT solver for a single propeller design.

    The solver copies the parameters at construction, synthesizes any
    empty distributions on that copy and caches the station grid. Edits
    to the caller's PropellerParams afterwards are not observed; build a
    new solver instead.
    """

    def __init__(
        self,
        params: PropellerParams,
        conditions: Optional[OperatingConditions] = None,
        settings: Optional[SolverSettings] = None,
        polar_source=None,
        strict: bool = False,
    ):
        """
        Initialize solver.

        Args:
            params: Propeller design (copied)
            conditions: Operating point (defaults if None)
            settings: Numerical settings (defaults if None)
            polar_source: Optional lookup with get_polar(name, reynolds),
                e.g. a PolarDatabase, queried for named custom airfoils
            strict: Raise NumericDegenerate instead of propagating NaN
        """
        self.settings = settings or SolverSettings()
        self.params = params.with_default_distributions(self.settings.num_stations)
        self.conditions = replace(conditions) if conditions else OperatingConditions()
        self.strict = strict
        self._polar_source = polar_source

        if strict:
            self._check_geometry()

        self._dist = RadialDistributionModel.from_params(self.params, self.settings.num_stations)
        self._stations = self._dist.stations
        self._chord = self._dist.station_values("chord")
        self._pitch = self._dist.station_values("pitch")
        self._polar = self._resolve_polar()

    def _check_geometry(self):
        p = self.params
        if p.hub_radius <= 0:
            raise NumericDegenerate(f"Hub radius must be positive (got {p.hub_radius})")
        if p.diameter <= 2 * p.hub_radius:
            raise NumericDegenerate(
                f"Diameter ({p.diameter}) must exceed twice the hub radius ({p.hub_radius})"
            )
        if p.num_blades < 2:
            raise NumericDegenerate(f"Blade count must be at least 2 (got {p.num_blades})")

    def _resolve_polar(self) -> Optional[AirfoilPolar]:
        """Polar from the airfoil config, else from the polar source, else None."""
        airfoil = self.params.airfoil
        polar = getattr(airfoil, "polar", None)
        if polar is not None and polar.is_usable:
            return polar

        if self._polar_source is not None and isinstance(airfoil, CustomAirfoil) and airfoil.name:
            r_ref = REFERENCE_RADIUS_FRACTION * self._dist.tip_radius
            chord = self._dist.chord_at(r_ref)
            reynolds = self.conditions.reynolds_number(chord, r_ref)
            polar = self._polar_source.get_polar(airfoil.name, reynolds)
            if polar is not None and polar.is_usable:
                return polar
            logger.debug("No usable polar for %s, using thin-airfoil model", airfoil.name)
        return None

    @property
    def stations(self) -> NDArray[np.float64]:
        """Station radii [m]."""
        return self._stations.copy()

    @property
    def polar(self) -> Optional[AirfoilPolar]:
        """Polar used for section coefficients (None = thin-airfoil model)."""
        return self._polar

    def with_conditions(self, **changes) -> "BEMTSolver":
        """New solver for the same design with updated operating conditions."""
        return BEMTSolver(
            self.params,
            replace(self.conditions, **changes),
            self.settings,
            self._polar_source,
            self.strict,
        )

    def section_coefficients(self, aoa_deg: float) -> Tuple[float, float]:
        """
        Section (Cl, Cd) at an angle of attack.

        Uses the polar when available, otherwise Cl = 2π·α and
        Cd = 0.01 + 0.01·α_deg². Cl is clamped to [cl_min, cl_max] and
        Cd to at least cd_min.
        """
        s = self.settings
        if self._polar is not None:
            cl, cd = self._polar.lookup(aoa_deg)
        else:
            cl = 2 * np.pi * np.radians(aoa_deg)
            cd = 0.01 + 0.01 * aoa_deg**2
        return float(np.clip(cl, s.cl_min, s.cl_max)), float(np.maximum(cd, s.cd_min))

    def _loss_factor(self, r, phi) -> float:
        s = self.settings
        half_b = self.params.num_blades / 2
        abs_phi = np.abs(phi)
        f_tip = half_b * (self._dist.tip_radius - r) / (r * abs_phi)
        f_hub = half_b * (r - self._dist.hub_radius) / (self._dist.hub_radius * abs_phi)
        tip = prandtl_loss(f_tip, s.loss_floor, s.loss_exponent_limit)
        hub = prandtl_loss(f_hub, s.loss_floor, s.loss_exponent_limit)
        return tip * hub

    def _solve_station(
        self,
        r: float,
        chord: float,
        pitch: float,
        omega: float,
        velocity: float,
        rho: float,
    ) -> StationResult:
        s = self.settings
        r = np.float64(r)
        omega = np.float64(omega)
        velocity = np.float64(velocity)
        num_blades = self.params.num_blades

        beta = np.arctan(pitch / (2 * np.pi * r))
        sigma = chord * num_blades / (2 * np.pi * r)

        phi = np.arctan2(velocity, omega * r)
        a = np.float64(0.0)
        a_prime = np.float64(0.0)
        iterations = 0
        converged = False

        for iterations in range(1, s.max_iterations + 1):
            phi_old = phi
            loss = self._loss_factor(r, phi)

            aoa = np.degrees(beta - phi)
            cl, cd = self.section_coefficients(aoa)

            x = sigma * cl / (4 * loss * np.sin(phi))
            y = sigma * cd / (4 * loss * np.cos(phi))
            # x/(1+x), finite for x = inf (phi = 0)
            a = np.clip(1 - 1 / (1 + x), 0.0, 0.9)
            a_prime = np.clip(1 - 1 / (1 + y), -0.5, 0.5)

            phi = np.arctan(
                velocity * (1 / (1 + a))
                / (omega * r * ((1 - a_prime) / (1 + a)))
            )

            if np.abs(phi - phi_old) < s.tolerance:
                converged = True
                break

        aoa = np.degrees(beta - phi)
        cl, cd = self.section_coefficients(aoa)

        v_local_sq = (velocity * (1 + a))**2 + (omega * r * (1 - a_prime))**2
        dr = self._dist.station_width
        dynamic = 0.5 * rho * v_local_sq * chord * dr

        return StationResult(
            radius=float(r),
            phi=float(phi),
            a=float(a),
            a_prime=float(a_prime),
            aoa=float(aoa),
            cl=cl,
            cd=cd,
            induced_velocity=float(a * velocity),
            lift=float(dynamic * cl),
            drag=float(dynamic * cd),
            iterations=iterations,
            converged=converged,
        )

    def solve(self, rpm: Optional[float] = None, velocity: Optional[float] = None) -> BEMTResult:
        """
        Solve one operating point.

        Args:
            rpm: Rotational speed (rev/min), defaults to the stored conditions
            velocity: Forward speed (m/s), defaults to the stored conditions

        Returns:
            BEMTResult
        """
        rpm = self.conditions.rpm if rpm is None else rpm
        velocity = self.conditions.velocity if velocity is None else velocity

        if self.strict and rpm <= 0:
            raise NumericDegenerate(f"RPM must be positive (got {rpm})")

        rho = self.conditions.air_density
        diameter = self.params.diameter
        omega = np.float64(rpm) * 2 * np.pi / 60
        velocity = np.float64(velocity)

        n_st = len(self._stations)
        induced = np.zeros(n_st)
        aoa = np.zeros(n_st)
        cl = np.zeros(n_st)
        cd = np.zeros(n_st)
        lift = np.zeros(n_st)
        drag = np.zeros(n_st)
        iterations = np.zeros(n_st, dtype=int)
        converged = np.zeros(n_st, dtype=bool)

        thrust = np.float64(0.0)
        torque = np.float64(0.0)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            for i, r in enumerate(self._stations):
                st = self._solve_station(r, self._chord[i], self._pitch[i], omega, velocity, rho)

                induced[i] = st.induced_velocity
                aoa[i] = st.aoa
                cl[i] = st.cl
                cd[i] = st.cd
                lift[i] = st.lift
                drag[i] = st.drag
                iterations[i] = st.iterations
                converged[i] = st.converged

                if not st.converged:
                    logger.debug(
                        "Station %d (r=%.4f m) not converged after %d iterations",
                        i, st.radius, st.iterations,
                    )

                sin_phi = np.sin(st.phi)
                cos_phi = np.cos(st.phi)
                thrust += st.lift * cos_phi - st.drag * sin_phi
                torque += st.radius * (st.lift * sin_phi + st.drag * cos_phi)

            n = np.float64(rpm) / 60
            ct = thrust / (rho * n**2 * diameter**4)
            cq = torque / (rho * n**2 * diameter**5)
            cp = 2 * np.pi * cq
            advance_ratio = velocity / (n * diameter)
            raw_efficiency = thrust * velocity / (torque * omega)

        if np.isnan(raw_efficiency):
            raw_efficiency = 0.0
        efficiency = float(np.clip(raw_efficiency, 0.0, 1.0)) * 100

        logger.debug(
            "BEMT rpm=%.1f V=%.2f: T=%.4g N, Q=%.4g N*m, eta=%.1f%%",
            rpm, velocity, thrust, torque, efficiency,
        )

        return BEMTResult(
            thrust=float(thrust),
            torque=float(torque),
            power=float(torque * omega),
            efficiency=efficiency,
            ct=float(ct),
            cq=float(cq),
            cp=float(cp),
            advance_ratio=float(advance_ratio),
            local_induced_velocity=induced,
            local_aoa=aoa,
            local_cl=cl,
            local_cd=cd,
            local_lift=lift,
            local_drag=drag,
            iterations=iterations,
            converged=converged,
        )

    def generate_performance_curves(
        self,
        rpm_min: float,
        rpm_max: float,
        num_points: int = 20,
        velocity: Optional[float] = None,
    ) -> PerformanceCurves:
        """
        Sweep evenly spaced RPM values at fixed forward speed.

        Args:
            rpm_min: First RPM
            rpm_max: Last RPM
            num_points: Number of RPM values
            velocity: Forward speed (m/s), defaults to the stored conditions

        Returns:
            PerformanceCurves with one entry per RPM value
        """
        rpms = np.linspace(rpm_min, rpm_max, num_points)
        columns = {name: np.zeros(num_points) for name in
                   ("thrust", "torque", "power", "efficiency", "ct", "cq", "cp", "advance_ratio")}

        for i, rpm in enumerate(rpms):
            result = self.solve(float(rpm), velocity)
            for name, column in columns.items():
                column[i] = getattr(result, name)

        return PerformanceCurves(rpm=rpms, **columns)

    def generate_efficiency_map(
        self,
        rpm: float,
        j_min: float = 0.0,
        j_max: float = 1.5,
        j_steps: int = 20,
    ) -> EfficiencyMap:
        """
        Scan advance ratio against RPM multipliers 0.5x ... 1.4x.

        For each of j_steps evenly spaced advance ratios the forward speed
        is V = J·n·D at the nominal RPM; each speed is then solved at the
        ten RPM multiples.

        Args:
            rpm: Nominal rotational speed (rev/min)
            j_min: First advance ratio
            j_max: Last advance ratio
            j_steps: Number of advance ratios

        Returns:
            EfficiencyMap with (j_steps, 10) grids
        """
        n = rpm / 60
        diameter = self.params.diameter
        advance_ratios = np.linspace(j_min, j_max, j_steps)
        factors = np.array(RPM_FACTORS)
        rpms = rpm * factors

        ct = np.zeros((j_steps, len(factors)))
        cq = np.zeros_like(ct)
        efficiency = np.zeros_like(ct)

        for j, advance_ratio in enumerate(advance_ratios):
            velocity = float(advance_ratio * n * diameter)
            for k, adjusted_rpm in enumerate(rpms):
                result = self.solve(float(adjusted_rpm), velocity)
                ct[j, k] = result.ct
                cq[j, k] = result.cq
                efficiency[j, k] = result.efficiency

        return EfficiencyMap(
            advance_ratio=advance_ratios,
            rpm=rpms,
            rpm_factors=factors,
            ct=ct,
            cq=cq,
            efficiency=efficiency,
        )
