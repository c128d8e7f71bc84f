import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from symsolve import check_solution, get_settings, solve, solve_system
from symsolve.results import format_numeric

logger = logging.getLogger(__name__)

app = FastAPI(title="SymSolve API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class EquationRequest(BaseModel):
    equation: str
    variable: str = "x"


class SolveResponse(BaseModel):
    equation: str
    variable: str
    solutions: list[str]
    numeric: list[Optional[str]]


class SystemRequest(BaseModel):
    equations: list[str]
    variables: Optional[list[str]] = None


class SystemResponse(BaseModel):
    solutions: dict[str, str]


class CheckRequest(BaseModel):
    equation: str
    values: str


class CheckResponse(BaseModel):
    holds: bool
    lhs: str
    rhs: str


def _numeric_or_none(value) -> Optional[str]:
    if value.free_symbols:
        return None
    return format_numeric(value)


def _run(func, *args):
    try:
        return func(*args)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Solver failure")
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")


@app.post("/api/solve", response_model=SolveResponse)
def solve_equation(req: EquationRequest):
    equation = req.equation.strip()
    if not equation:
        raise HTTPException(status_code=400, detail="Equation cannot be empty.")
    variable = req.variable.strip() or "x"

    solutions = _run(solve, equation, variable)
    return SolveResponse(
        equation=equation,
        variable=variable,
        solutions=[str(s) for s in solutions],
        numeric=[_numeric_or_none(s) for s in solutions],
    )


@app.post("/api/solve-system", response_model=SystemResponse)
def solve_equations(req: SystemRequest):
    equations = [e.strip() for e in req.equations if e.strip()]
    if not equations:
        raise HTTPException(status_code=400, detail="At least one equation is required.")

    settings = get_settings().replace(solutions_as_object=True)
    solutions = _run(solve_system, equations, req.variables, settings)
    return SystemResponse(solutions={name: str(value) for name, value in solutions.items()})


@app.post("/api/check", response_model=CheckResponse)
def check(req: CheckRequest):
    equation = req.equation.strip()
    if not equation:
        raise HTTPException(status_code=400, detail="Equation cannot be empty.")

    result = _run(check_solution, equation, req.values)
    return CheckResponse(holds=result["holds"], lhs=str(result["lhs"]), rhs=str(result["rhs"]))
