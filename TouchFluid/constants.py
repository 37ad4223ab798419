# -- Physical Constants for the Interactive SPH Fluid -- #

'''
Physical and numerical constants for the interactive 2D SPH fluid.

The simulation runs in screen-sized world units: one metre is
mapped to `scale` world units, so a window that is 800 units wide
holds an 8 m fluid box.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-based fluid simulation
    for interactive applications

Sean Bowman [02/05/2026]
'''

#--------------------------------------------------------------------#
# -- World Scale -- #
#--------------------------------------------------------------------#

# World units per metre
scale: float = 100.0

#--------------------------------------------------------------------#
# -- Fluid Properties -- #
#--------------------------------------------------------------------#

# Molar gas constant [J/(mol*K)]
molarGasConstant: float = 8.3144598

# Fluid temperature used by the ideal-gas equation of state [K]
temperature: float = 300.0

# Gas constant k in p = k * (rho - rho_0), in world units
gasConstant: float = scale * molarGasConstant * temperature

# Rest density rho_0 (zero pressure reference)
# With rho_0 = 0 the pressure never goes negative
restDensity: float = 0.0

# Viscosity coefficient mu
viscosity: float = 1.0

# Gravitational acceleration, acting in -y [world units/s^2]
gravity: float = scale * 9.81

# Mass of a freshly spawned particle
particleMass: float = 1.0

# Densities at or below this are treated as empty space; such
# particles contribute no pressure or viscosity term
minimumDensity: float = 1e-12

#--------------------------------------------------------------------#
# -- Kernel Parameters -- #
#--------------------------------------------------------------------#

# Support radius h of the Poly6, Spiky and Viscosity kernels
supportRadius: float = scale * 2.5

# Support radius of the touch falloff kernel
touchSupportRadius: float = scale * 5.0

# Width of the Gaussian touch falloff, as a fraction of its support
touchSigma: float = 0.2

# Strength of the touch repulsion
touchStrength: float = scale * 2.0

#--------------------------------------------------------------------#
# -- Time Stepping -- #
#--------------------------------------------------------------------#

# Fixed simulation time step [s]
timestep: float = 1.0 / 10.0

# Sentinel density/pressure given to freshly spawned particles
initialSentinel: float = 1.0

#--------------------------------------------------------------------#
# -- Calibration -- #
#--------------------------------------------------------------------#

# Particle count the calibration probing starts from
calibrationSeedCount: int = 10

# Growth factor between consecutive probes
calibrationGrowthFactor: float = 1.25

# Fraction of the timestep a probe step may take
calibrationStepBudgetFraction: float = 1.0 / 1.25

# Budget for the optional density-query workload [s]
densityQueryBudget: float = 1.0 / 30.0

# Synthetic touch points used by every calibration probe
calibrationTouchPoints: int = 4

#--------------------------------------------------------------------#
# -- Host Input -- #
#--------------------------------------------------------------------#

# Maximum number of simultaneously active touch points per frame
maxTouchPoints: int = 9
