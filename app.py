# app.py
import streamlit as st
import pandas as pd

from timetable_engine.config import load_config
from timetable_engine.data_loader import filter_courses, load_courses
from timetable_engine.evaluation import evaluate
from timetable_engine.export import allocations_to_dataframe, cell_style, grid_dataframe, timetable_to_dataframe
from run import build_engine

# --- CONFIGURACIÓN DE PÁGINA ---
st.set_page_config(page_title="Horario Semanal", layout="wide", initial_sidebar_state="expanded")


def style_occupancy(df):
    return df.style.map(cell_style)


def main():
    if 'cfg' not in st.session_state:
        st.session_state.cfg = load_config("config.yaml")
    cfg = st.session_state.cfg

    if 'courses' not in st.session_state:
        st.session_state.courses = load_courses("data/courses.csv")
    all_courses = st.session_state.courses

    # --- BARRA LATERAL ---
    with st.sidebar:
        st.title("📅 Horario Semanal")
        st.markdown("---")
        departments = ["ALL"] + sorted({c.department for c in all_courses})
        department = st.selectbox("Departamento", departments, index=0)
        seed = st.number_input("Semilla", value=int(cfg.seed), step=1)
        generate_clicked = st.button("🚀 Generar Horario")
        st.markdown("---")
        st.info("Asignación voraz de un solo paso\n(sin retroceso)")

    courses = filter_courses(all_courses, department)
    st.header(f"Cursos activos: {department}")
    st.dataframe(
        pd.DataFrame(
            [
                {"ID": c.course_id, "Código": c.code, "Depto": c.department,
                 "Tipo": c.course_type.value if c.course_type else "?", "Créditos": c.credits}
                for c in courses
            ]
        ),
        height=250,
        use_container_width=True,
    )

    if generate_clicked:
        engine = build_engine(cfg)
        st.session_state.result = engine.generate(courses, seed=int(seed))
        st.session_state.catalog = engine.catalog

    result = st.session_state.get("result")
    if result is None:
        st.warning("Presione 'Generar Horario' para armar la grilla.")
        return

    catalog = st.session_state.catalog
    eval_res = evaluate(result, catalog)

    c1, c2, c3 = st.columns(3)
    c1.metric("Sesiones asignadas", f"{eval_res.total_assigned}/{eval_res.total_required}")
    c2.metric("Ocupación", f"{eval_res.utilization:.0%}")
    c3.metric("Cursos con faltantes", len(result.shortfalls))

    st.subheader("Grilla")
    st.dataframe(style_occupancy(grid_dataframe(result.timetable, catalog)), use_container_width=True)

    st.subheader("Sesiones requeridas vs asignadas")
    st.dataframe(allocations_to_dataframe(result.allocations), use_container_width=True)

    df_res = timetable_to_dataframe(result.timetable)
    csv = df_res.to_csv(index=False).encode("utf-8")
    st.download_button("📥 Descargar CSV", data=csv, file_name="horario_semanal.csv", mime="text/csv")


if __name__ == "__main__":
    main()
