"""Pure calculation core: tax, payroll contributions, benefits, child costs, simulation."""
